from feed_aggregator.cli import app

app()
