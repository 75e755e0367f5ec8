"""
Weather Reading Model
"""

from weather_api.extensions import db
from weather_api.models.ids import new_object_id
from weather_api.utils.dates import format_datetime

# JSON field name -> model attribute, for every numeric measurement
MEASUREMENT_FIELDS = {
    'precipitation': 'precipitation',
    'latitude': 'latitude',
    'longitude': 'longitude',
    'temperature': 'temperature',
    'atmosphericPressure': 'atmospheric_pressure',
    'maxWindSpeed': 'max_wind_speed',
    'solarRadiation': 'solar_radiation',
    'vaporPressure': 'vapor_pressure',
    'humidity': 'humidity',
    'windDirection': 'wind_direction',
}

READING_FIELDS = dict(
    deviceName='device_name',
    readingDateTime='reading_date_time',
    **MEASUREMENT_FIELDS
)

MAX_HUMIDITY = 100
MIN_TEMPERATURE = -50
MAX_TEMPERATURE = 60


class WeatherReading(db.Model):
    """One sensor observation for a device at a point in time"""
    __tablename__ = 'weather_data'
    
    id = db.Column(db.String(24), primary_key=True, default=new_object_id)
    device_name = db.Column(db.String(100), nullable=False, index=True)
    reading_date_time = db.Column(db.DateTime, nullable=False, index=True)
    
    precipitation = db.Column(db.Float)  # mm/h
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    temperature = db.Column(db.Float)  # deg C
    atmospheric_pressure = db.Column(db.Float)  # kPa
    max_wind_speed = db.Column(db.Float)  # m/s
    solar_radiation = db.Column(db.Float)  # W/m2
    vapor_pressure = db.Column(db.Float)  # kPa
    humidity = db.Column(db.Float)  # %
    wind_direction = db.Column(db.Float)  # degrees
    
    def to_dict(self):
        data = {'_id': self.id}
        for name, attr in READING_FIELDS.items():
            data[name] = getattr(self, attr)
        data['readingDateTime'] = format_datetime(self.reading_date_time)
        return data
    
    def __repr__(self):
        return f'<WeatherReading {self.device_name} T:{self.temperature} at {self.reading_date_time}>'
