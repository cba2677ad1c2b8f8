# Services package.
#
#   validation    - required-field checks for post input
#   rendering     - markdown to HTML
#   post_service  - create / update / delete entry points plus the cached
#                   read helpers used by the page and API routers
#
# Service functions receive a PostStore (see blog.store) rather than a
# session, so the router layer decides which store, and therefore which
# transaction, a request runs against.
