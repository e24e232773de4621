"""
Shared pytest setup: put the Lambda sources on the path and give boto3 a
region and dummy credentials so module-level clients can be created.
"""
import os
import sys

os.environ.setdefault('AWS_DEFAULT_REGION', 'us-east-1')
os.environ.setdefault('AWS_ACCESS_KEY_ID', 'testing')
os.environ.setdefault('AWS_SECRET_ACCESS_KEY', 'testing')
os.environ.setdefault('COMPLAINTS_TABLE', 'test-complaints')
os.environ.setdefault('ATTACHMENTS_BUCKET', 'test-attachments')

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
sys.path.insert(0, os.path.dirname(__file__))
