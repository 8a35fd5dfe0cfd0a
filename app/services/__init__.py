# Services package.
#
# Each module exposes async functions holding the business logic and
# database access for one table of the blog writer:
#
#   post_service     : create / partial update / list for BlogPost
#   version_service  : create / partial update / delete / list for BlogPostVersion
#   seo_service      : upsert / read for BlogSeoMeta
#   ownership        : caller and ownership checks shared by the above
#
# Service functions take an AsyncSession and the caller (CurrentUser or
# None) as their first arguments; the router layer owns the transaction
# boundary through the ``get_db`` dependency.
