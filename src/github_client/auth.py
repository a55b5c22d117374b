import logging

from github import Auth, GithubIntegration

from config import AppCredentials, AuthMethod, TokenAuth


def resolve_token(auth: AuthMethod, api_url: str, logger: logging.Logger) -> str:
    """
    :returns: A token to send as the bearer token on every request.
        GitHub App credentials are exchanged for an installation access token.
    """
    match auth:
        case TokenAuth(token=token):
            logger.debug("Using token authentication.")
            return token
        case AppCredentials(app_id=app_id, private_key=private_key, installation_id=installation_id):
            logger.debug("Getting an installation access token for GitHub App %s.", app_id)
            integration = GithubIntegration(auth=Auth.AppAuth(app_id, private_key), base_url=api_url)
            return integration.get_access_token(int(installation_id)).token
    raise TypeError(f"Unsupported authentication method: {type(auth)}")
