"""
Configuration module for Lambda handlers.
Loads all environment variables needed by the complaints backend.
"""
import json
import os


# Worker contacts per escalation level
DEFAULT_LEVEL_WORKERS = {
    'Level 1': {'name': 'Carpenter Krishna', 'phone': '9876543210'},
    'Level 2': {'name': 'Maintenance Supervisor', 'phone': '9876500000'},
    'Level 3': {'name': 'External Contractor', 'phone': '9876511111'},
    'Level 4': {'name': 'Hostel Warden', 'phone': '9876522222'},
}

# First responder per issue type (Level 1 tradespeople)
DEFAULT_ISSUE_WORKERS = {
    'Plumbing': {'name': 'Plumber Ravi', 'phone': '9876533331'},
    'Electrical': {'name': 'Electrician Suresh', 'phone': '9876533332'},
    'Furniture': {'name': 'Carpenter Krishna', 'phone': '9876543210'},
    'Cleanliness': {'name': 'Housekeeping Lakshmi', 'phone': '9876533334'},
    'Internet/WiFi': {'name': 'Network Technician Arjun', 'phone': '9876533335'},
    'Air Conditioning': {'name': 'HVAC Technician Mohan', 'phone': '9876533336'},
    'Security': {'name': 'Security Officer Prakash', 'phone': '9876533337'},
    'Pest Control': {'name': 'Pest Control Ramesh', 'phone': '9876533338'},
    'Water Supply': {'name': 'Plumber Ravi', 'phone': '9876533331'},
}


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_json(name: str, default: dict) -> dict:
    """Read a JSON object from the environment, falling back to the default."""
    raw = os.environ.get(name)
    if not raw:
        return default
    value = json.loads(raw)
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be a JSON object")
    return value


class Config:
    """Centralized configuration from environment variables."""

    # AWS Region
    AWS_REGION = os.environ.get('AWS_REGION', 'us-east-1')

    # DynamoDB Tables
    COMPLAINTS_TABLE = os.environ.get('COMPLAINTS_TABLE', 'hostel-complaints')

    # S3 Buckets
    ATTACHMENTS_BUCKET = os.environ.get('ATTACHMENTS_BUCKET', '')
    PRESIGNED_URL_EXPIRATION = int(os.environ.get('PRESIGNED_URL_EXPIRATION', '3600'))
    MAX_IMAGES_PER_COMPLAINT = int(os.environ.get('MAX_IMAGES_PER_COMPLAINT', '3'))

    # Escalation
    AUTO_ESCALATE_DAYS = int(os.environ.get('AUTO_ESCALATE_DAYS', '3'))
    AUTO_ASSIGN_ON_CREATE = _env_bool('AUTO_ASSIGN_ON_CREATE', True)
    LEVEL_WORKERS = _env_json('LEVEL_WORKERS_JSON', DEFAULT_LEVEL_WORKERS)
    ISSUE_WORKERS = _env_json('ISSUE_WORKERS_JSON', DEFAULT_ISSUE_WORKERS)


config = Config()
