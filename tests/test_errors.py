from errors import (ConfigurationError, IdentityNotFound, RateLimited, UpstreamAuthError, UpstreamError, UpstreamNotFound,
                    describe_failure)


def test_typed_errors():
    assert describe_failure(UpstreamAuthError('Bad credentials', service='jira', status=401)) == \
        'Authentication error: please check your JIRA credentials (status 401).'
    assert describe_failure(UpstreamNotFound('gone', service='github', status=404)).startswith("Sorry, I couldn't find")
    assert describe_failure(RateLimited('slow', service='github', status=429)) == \
        'API rate limit exceeded. Please try again in a few minutes.'
    assert describe_failure(ConfigurationError('JIRA_HOST is not set')) == 'Configuration error: JIRA_HOST is not set'


def test_untyped_errors_fall_back_to_message_text():
    assert describe_failure(RuntimeError('got 403 from upstream')).startswith('Authentication error')
    assert describe_failure(RuntimeError('GitHub API rate limit hit')).startswith('API rate limit exceeded')
    assert describe_failure(UpstreamError('jira: 500 Server Error', service='jira', status=500)) == \
        'An error occurred while fetching data: jira: 500 Server Error'


def test_not_found_message_names_the_service():
    assert describe_failure(UpstreamNotFound('gone', service='jira', status=404)).startswith("Sorry, JIRA couldn't find")
    assert 'repositories' in describe_failure(UpstreamNotFound('gone', service='github', status=404))
    assert 'repositories' not in describe_failure(UpstreamError('jira: 404', service='jira', status=404))


def test_unknown_person_has_its_own_message():
    message = describe_failure(IdentityNotFound("No known user found in 'bob'"))
    assert message.startswith('Unknown user:')
    assert 'An error occurred' not in message
