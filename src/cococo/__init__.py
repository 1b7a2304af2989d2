"""cococo package: xcresult code coverage to SonarQube generic coverage XML."""

__version__ = "1.0.0"
