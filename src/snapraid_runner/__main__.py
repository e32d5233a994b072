from snapraid_runner.cli import app

app()
