from .client import SanityClient
