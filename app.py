"""
Weather Data API
Application Entry Point

This file serves as the entry point for the Flask application.
It uses the application factory pattern defined in the weather_api package.
"""

import logging

from dotenv import load_dotenv

# Load environment variables from .env file before the config is read
load_dotenv()

from weather_api import create_app  # noqa: E402

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

# Create the Flask application using the factory
app = create_app()

if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
