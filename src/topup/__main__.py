from topup.cli import app

app()
