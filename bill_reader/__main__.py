from bill_reader.main import run

run()
