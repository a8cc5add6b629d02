from tests.fixtures.aws_fixtures import client, mocked_aws, settings  # noqa: F401
