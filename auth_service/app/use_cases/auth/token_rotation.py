from auth_service.app.services.secret_hasher import ISecretHasher
from auth_service.app.services.token_issuer import ITokenIssuer, TokenPair
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.entities import User


async def issue_rotated_tokens(
    uow: UnitOfWork, hasher: ISecretHasher, issuer: ITokenIssuer, user: User
) -> TokenPair:
    """
    Mint a new token pair and overwrite the user's refresh slot with the hash
    of the new refresh token. Any previously issued refresh token stops
    verifying as soon as the caller commits.
    """
    tokens = issuer.issue(user.id, user.email)
    refresh_token_hash = await hasher.hash(tokens.refresh_token)
    await uow.users.update_refresh_token_hash(user.id, refresh_token_hash)
    return tokens
