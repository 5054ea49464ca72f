from datetime import datetime, UTC
import uuid

from web.extensions import db


class SetupPreset(db.Model):
    """Saved machining setup: settings, geometry and optional workpiece."""

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC))
    modified_at = db.Column(db.DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))

    machine_type = db.Column(db.String(20), nullable=False, default='mill')  # 'mill', 'lathe', 'printer'

    # Request parts stored as JSON, in the same shape the generate endpoint accepts.
    # They are parsed only when the preset is generated.
    settings = db.Column(db.JSON, nullable=False, default=dict)
    geometry = db.Column(db.JSON, nullable=False, default=dict)
    workpiece = db.Column(db.JSON, nullable=True)
