"""
landing-deploy: publishes landing pages to S3, CloudFront and Route 53
"""

__version__ = "0.1.0"
