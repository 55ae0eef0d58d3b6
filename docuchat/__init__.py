"""DocuChat: document upload and contextual chat service."""
