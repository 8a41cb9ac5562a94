from esi_isk.ui.cli import run

run()
