"""
Deleted Reading Model

Audit copy of a reading removed through the logged-deletion path.
"""

from weather_api.extensions import db
from weather_api.models.ids import new_object_id
from weather_api.models.reading import READING_FIELDS
from weather_api.utils.dates import utcnow, format_datetime


class DeletedReading(db.Model):
    """Deletion log entry; written once, never updated"""
    __tablename__ = 'deleted_data'
    
    id = db.Column(db.String(24), primary_key=True, default=new_object_id)
    original_id = db.Column(db.String(24), nullable=False, index=True)
    device_name = db.Column(db.String(100), nullable=False)
    reading_date_time = db.Column(db.DateTime, nullable=False)
    
    precipitation = db.Column(db.Float)
    latitude = db.Column(db.Float)
    longitude = db.Column(db.Float)
    temperature = db.Column(db.Float)
    atmospheric_pressure = db.Column(db.Float)
    max_wind_speed = db.Column(db.Float)
    solar_radiation = db.Column(db.Float)
    vapor_pressure = db.Column(db.Float)
    humidity = db.Column(db.Float)
    wind_direction = db.Column(db.Float)
    
    # Email of the account that deleted the reading, copied by value
    deleted_by = db.Column(db.String(120), nullable=False)
    deleted_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    
    def to_dict(self):
        data = {'_id': self.id, 'originalId': self.original_id}
        for name, attr in READING_FIELDS.items():
            data[name] = getattr(self, attr)
        data['readingDateTime'] = format_datetime(self.reading_date_time)
        data['deletedBy'] = self.deleted_by
        data['deletedAt'] = format_datetime(self.deleted_at)
        return data
    
    def __repr__(self):
        return f'<DeletedReading {self.original_id} by {self.deleted_by}>'
