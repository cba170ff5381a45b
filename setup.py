from setuptools import setup, find_packages

setup(
    name="photo-backup-service",
    version="1.0.0",
    description="Serverless photo and video backup: uploads, thumbnails, face tagging and albums",
    author="Photo Backup Team",
    packages=find_packages(include=["shared", "shared.*"]),
    install_requires=[
        "boto3>=1.34.0",
        "Pillow>=10.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "moto>=5.0.0",
        ],
    },
    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
