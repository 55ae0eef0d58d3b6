"""AWS boundary: S3 document storage and Bedrock Knowledge Base search."""
