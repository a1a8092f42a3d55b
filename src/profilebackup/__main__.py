from profilebackup.main import cli

cli()
