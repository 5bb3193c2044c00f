import os
import psycopg2
from urllib.parse import urlparse

from core.config import DATABASE_URL


def get_connection():
    if DATABASE_URL:
        # Parse DATABASE_URL
        url = urlparse(DATABASE_URL)
        return psycopg2.connect(
            dbname=url.path[1:],
            user=url.username,
            password=url.password,
            host=url.hostname,
            port=url.port
        )

    # Fallback to individual vars
    return psycopg2.connect(
        dbname=os.getenv('DB_NAME'),
        user=os.getenv('DB_USER'),
        password=os.getenv('DB_PASSWORD'),
        host=os.getenv('DB_HOST'),
        port=os.getenv('DB_PORT')
    )
