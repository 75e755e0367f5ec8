"""
Configuration settings for the Weather Data API
"""
import os


class Config:
    """Flask application configuration"""
    
    # Flask secret key
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production-12345'
    
    # Database configuration
    basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'instance', 'weather_data.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    
    # Header carrying the caller's authentication key
    AUTH_HEADER = 'X-AUTH-KEY'
    
    # Query settings
    WEATHER_PAGE_SIZE = int(os.environ.get('WEATHER_PAGE_SIZE') or 5)
    USERS_LIST_LIMIT = int(os.environ.get('USERS_LIST_LIMIT') or 10)
    MAX_PRECIPITATION_WINDOW_MONTHS = 5
    
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    
    # First Teacher account, created at start-up when both are set
    BOOTSTRAP_TEACHER_EMAIL = os.environ.get('BOOTSTRAP_TEACHER_EMAIL')
    BOOTSTRAP_TEACHER_PASSWORD = os.environ.get('BOOTSTRAP_TEACHER_PASSWORD')


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    BOOTSTRAP_TEACHER_EMAIL = None
    BOOTSTRAP_TEACHER_PASSWORD = None
