from setuptools import setup, find_packages

# Base requirements - always needed
install_requires = [
    "dbus-python>=1.2.0",
    "PyYAML>=6.0",
]

setup(
    name="mprisctl",
    version="0.3.0",
    description="Control client for MPRIS2 media players on the D-Bus session bus",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require={
        "test": ["pytest>=8.0.0"],
    },
    entry_points={
        'console_scripts': [
            'mprisctl=mprisctl.cli:main',
        ],
    },
    python_requires='>=3.8',
)
