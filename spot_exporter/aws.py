# spot_exporter/aws.py
import threading

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from spot_exporter.models import SessionError


def create_session(region_name, profile=None):
    """
    Build the long-lived boto3 session. Any failure here is fatal: no scrape
    can succeed without credentials.
    """
    try:
        session = (
            boto3.Session(profile_name=profile, region_name=region_name)
            if profile
            else boto3.Session(region_name=region_name)
        )
        credentials = session.get_credentials()
    except BotoCoreError as e:
        raise SessionError(f"failed to create session: {e}")
    if credentials is None:
        raise SessionError("failed to create session: no AWS credentials found")
    return session


class EC2ClientFactory:
    """
    Hands out EC2 clients for any region from one session.

    boto3 sessions are not thread safe, so client creation is serialized;
    the returned clients can be used concurrently.
    """

    def __init__(self, session, connect_timeout=None, read_timeout=None):
        self.session = session
        self.lock = threading.Lock()
        opts = {}
        if connect_timeout is not None:
            opts["connect_timeout"] = connect_timeout
        if read_timeout is not None:
            opts["read_timeout"] = read_timeout
        self.config = Config(**opts) if opts else None

    def client(self, region=None):
        # region=None falls back to the session's own region
        with self.lock:
            return self.session.client("ec2", region_name=region, config=self.config)
