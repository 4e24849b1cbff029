from app import create_app

app = create_app()

# Serve with: gunicorn wsgi:app
