from fastapi import Query


class ArticleListParams:
    """
    Reusable FastAPI dependency that collects the article list query
    parameters.

    Usage in a router::

        @router.get("")
        async def list_articles(params: ArticleListParams = Depends()):
            ...

    Values are passed through unvalidated: ``article_service`` checks them
    against its whitelists so that each rejection carries its own message
    ("Invalid sort by", "Invalid order").

    Attributes
    ----------
    sort_by:
        Article column to sort by.
    order:
        ``ASC``/``DESC`` in either upper or lower case.
    topic:
        Optional topic slug to filter on.
    """

    def __init__(
        self,
        sort_by: str = Query(
            "created_at",
            description="Column to sort by: title, topic, author, body, created_at or votes.",
        ),
        order: str = Query(
            "desc",
            description="Sort direction: ASC, DESC, asc or desc.",
        ),
        topic: str | None = Query(
            None,
            description="Only return articles with this topic slug.",
        ),
    ) -> None:
        self.sort_by = sort_by
        self.order = order
        self.topic = topic
