from setuptools import setup, find_packages

setup(
    name="user-profile-backup",
    version="1.3.0",
    description="Mirrors a user's home directory into a backup directory with rsync, honoring an exclude list.",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["pyyaml", 
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "user-profile-backup=profilebackup.main:cli", 
        ],
    },
    python_requires=">=3.9",
)
