from setuptools import setup, find_packages

setup(
    name='fresim',
    version='0.1.0',
    packages=find_packages(),
    package_data={
        'fresim.models': ['*.json'],
    },
    install_requires=[
        'numpy',
        'shapely>=2.0',
        'tqdm',
        'matplotlib',
        'pandas',
        'pyarrow',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0',
            'pytest-cov>=4.0',
            'ruff>=0.1.0',
        ],
    },
    python_requires='>=3.9',
)
