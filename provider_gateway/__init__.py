"""Provider Gateway

Resolves which model provider a chat request is routed to and assembles the
client options and instrumented HTTP transport used to reach it.
"""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("provider-gateway")
except PackageNotFoundError:
    # Fallback for source checkouts
    __version__ = "0.1.0"
__author__ = "Provider Gateway"
