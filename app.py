"""Development entry point: ``flask --app app run`` or ``python app.py``."""

from src.workhours.workhours.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=app.config.get("DEBUG", False))
