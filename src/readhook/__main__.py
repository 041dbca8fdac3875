from readhook.cli import app

app()
