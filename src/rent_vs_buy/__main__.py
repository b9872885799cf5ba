from .cli import app

app(prog_name="rent-vs-buy")
