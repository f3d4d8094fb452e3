"""Install the social graph service."""

from setuptools import setup, find_packages

setup(
    name='socialgraph',
    version='0.1.0',
    packages=find_packages(exclude=['tests', '*test*']),
    install_requires=[
        "flask",
        "werkzeug",
        "sqlalchemy>=1.4",
        "pyjwt>=2",
        "pydantic>=2",
        "wtforms>=3",
        "email-validator",
        "python-json-logger",
        "click"
    ],
    extras_require={
        "test": [
            "pytest",
            "mimesis"
        ]
    },
    zip_safe=False
)
