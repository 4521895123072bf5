from preview_api.main import run

run()
