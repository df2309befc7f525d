from __future__ import annotations

import logging

from common.models.post import Post
from common.models.user import Identity

from ..exceptions import Forbidden
from .tokens import TokenIssuer


logger = logging.getLogger(__name__)


class AccessGate:
    """보호된 포스트 작업 앞에 놓이는 인증/인가 검사.

    상태를 변경하지 않으며, 실패 시 Unauthenticated / Forbidden 을 발생시킨다.
    """

    def __init__(self, issuer: TokenIssuer) -> None:
        self._issuer = issuer

    def require_authenticated(self, token: str | None) -> Identity:
        return self._issuer.verify(token)

    def require_author(self, post: Post, identity: Identity) -> None:
        if post.author_id != identity.user_id:
            logger.warning(
                "rejected non-author access (author=%s)",
                post.author_id,
                extra={"user_id": identity.user_id, "post_id": post.id},
            )
            raise Forbidden()
