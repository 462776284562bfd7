"""Request handlers for the public routes.

Handlers take an API Gateway proxy style event and return a proxy response:

    GET    /                  redirect.welcome_handler
    GET    /{shortcode}       redirect.redirect_handler
    GET    /p/{shortcode}     redirect.page_redirect_handler
    GET    /api/{shortcode}   links.get_link_handler
    DELETE /api/{shortcode}   links.delete_link_handler
    GET    /api/search        links.search_links_handler
    POST   /api/new           links.create_link_handler
"""
