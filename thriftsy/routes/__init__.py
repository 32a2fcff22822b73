from thriftsy.routes.auth import auth_bp
from thriftsy.routes.users import user_bp
from thriftsy.routes.products import product_bp
from thriftsy.routes.categories import category_bp
from thriftsy.routes.orders import order_bp
from thriftsy.routes.wishlist import wishlist_bp
from thriftsy.routes.messages import message_bp
from thriftsy.routes.notifications import notification_bp
from thriftsy.routes.sellers import seller_bp
from thriftsy.routes.reviews import review_bp
from thriftsy.routes.admin import admin_bp


def register_blueprints(app):
    """Register all blueprints"""
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(user_bp, url_prefix='/api/users')
    app.register_blueprint(product_bp, url_prefix='/api/products')
    app.register_blueprint(category_bp, url_prefix='/api/categories')
    app.register_blueprint(order_bp, url_prefix='/api/orders')
    app.register_blueprint(wishlist_bp, url_prefix='/api/wishlist')
    app.register_blueprint(message_bp, url_prefix='/api/messages')
    app.register_blueprint(notification_bp, url_prefix='/api/notifications')
    app.register_blueprint(seller_bp, url_prefix='/api/sellers')
    app.register_blueprint(review_bp, url_prefix='/api/reviews')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
