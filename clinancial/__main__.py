from clinancial.cli import run

run()
