from setuptools import setup, find_packages

setup(
    name="logging_console",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    description="Console-style diagnostics routed to logging under caller-derived categories",
    author="Mat Davis",
    python_requires='>=3.11',
    install_requires=[
        "PyYAML>=6.0",            # For YAML logging configuration files
        "watchdog>=3.0",          # For reloading the logging configuration on change
    ],
    # Add classifiers for better package metadata
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
        'Topic :: System :: Logging',
    ],
)
