# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# validation and database access for a single domain aggregate:
#
#   topic_service    — read-only topic listing
#   article_service  — article reads (with comment counts) + vote updates
#   comment_service  — comment listing and creation for an Article
#   user_service     — read-only user listing
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Failures are raised as ``ApiError`` and left for
# the error-mapping middleware to turn into responses.
