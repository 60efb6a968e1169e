from bookshare import create_app

app = create_app()
