"""
S3 utility functions for complaint attachments.
Generates presigned URLs so browsers upload and view media directly.
"""
import uuid
import boto3
from typing import Iterable, List, Optional
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError
from .config import config
from .logging import logger

ATTACHMENTS_PREFIX = 'complaints/'

IMAGE_CONTENT_TYPES = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/webp': 'webp',
    'image/gif': 'gif',
}

VIDEO_CONTENT_TYPES = {
    'video/mp4': 'mp4',
    'video/webm': 'webm',
    'video/quicktime': 'mov',
}

# S3 client with custom signature version for presigned URLs
s3_client = boto3.client(
    's3',
    region_name=config.AWS_REGION,
    config=BotoConfig(signature_version='s3v4')
)


def build_attachment_key(complaint_id: str, kind: str, extension: str) -> str:
    """
    Build the object key for a new attachment.

    Args:
        complaint_id: Owning complaint
        kind: 'images' or 'video'
        extension: File extension without the dot

    Returns:
        Key like 'complaints/HC-.../images/<uuid>.jpg'
    """
    return f"{ATTACHMENTS_PREFIX}{complaint_id}/{kind}/{uuid.uuid4()}.{extension}"


def generate_upload_url(
    s3_key: str,
    content_type: str,
    expiration: int = None,
    bucket_name: str = None
) -> str:
    """
    Generate a presigned PUT URL for uploading one attachment.

    Raises:
        ClientError: if S3 refuses to sign the request
    """
    bucket = bucket_name or config.ATTACHMENTS_BUCKET
    return s3_client.generate_presigned_url(
        'put_object',
        Params={
            'Bucket': bucket,
            'Key': s3_key,
            'ContentType': content_type
        },
        ExpiresIn=expiration or config.PRESIGNED_URL_EXPIRATION
    )


def generate_presigned_url(
    s3_key: str,
    expiration: int = None,
    bucket_name: str = None
) -> str:
    """
    Generate a presigned URL for attachment download.

    Args:
        s3_key: The S3 object key (e.g., 'complaints/HC-.../images/uuid.jpg')
        expiration: URL expiration time in seconds (default from config)
        bucket_name: Optional bucket name, defaults to config.ATTACHMENTS_BUCKET

    Returns:
        Presigned URL string or original key if generation fails
    """
    if not s3_key:
        return s3_key

    bucket = bucket_name or config.ATTACHMENTS_BUCKET
    if not bucket:
        logger.warning("No ATTACHMENTS_BUCKET configured, returning original key")
        return s3_key

    # Full URLs from elsewhere are returned as-is
    if s3_key.startswith('http://') or s3_key.startswith('https://'):
        bucket_url = f"https://{bucket}.s3.amazonaws.com/"
        if s3_key.startswith(bucket_url):
            s3_key = s3_key[len(bucket_url):]
        else:
            return s3_key

    try:
        return s3_client.generate_presigned_url(
            'get_object',
            Params={
                'Bucket': bucket,
                'Key': s3_key
            },
            ExpiresIn=expiration or config.PRESIGNED_URL_EXPIRATION
        )
    except ClientError as e:
        logger.error(f"Error generating presigned URL for {s3_key}: {e}")
        return s3_key


def sign_attachments(images: Iterable[str], video: Optional[str]) -> dict:
    """Presigned download URLs for a complaint's media."""
    return {
        'images': [generate_presigned_url(key) for key in images],
        'video': generate_presigned_url(video) if video else None
    }


def delete_attachments(keys: List[str], bucket_name: str = None) -> None:
    """
    Delete attachment objects. Keys outside the attachments prefix are ignored.

    Raises:
        ClientError: if the delete request fails
    """
    bucket = bucket_name or config.ATTACHMENTS_BUCKET
    objects = [{'Key': key} for key in keys if key and key.startswith(ATTACHMENTS_PREFIX)]
    if not bucket or not objects:
        return

    # DeleteObjects accepts up to 1000 keys per call
    for i in range(0, len(objects), 1000):
        response = s3_client.delete_objects(
            Bucket=bucket,
            Delete={'Objects': objects[i:i + 1000], 'Quiet': True}
        )
        if response.get('Errors'):
            logger.warning(f"Some attachments were not deleted: {response['Errors']}")

    logger.info(f"Deleted {len(objects)} attachments from {bucket}")
