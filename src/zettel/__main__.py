from zettel.cli import app

app(prog_name="zettel")
