"""
Shared package for the photo-backup-service Lambda functions
"""
