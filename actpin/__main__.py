from actpin.cli import cli

cli()
