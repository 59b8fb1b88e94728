from apigee_backup.api.cli import cli

if __name__ == "__main__":
    cli()
