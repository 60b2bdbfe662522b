from app.alliance import create_app

app = create_app()
