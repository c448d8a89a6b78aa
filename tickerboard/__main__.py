from tickerboard.cli.main import run

run()
