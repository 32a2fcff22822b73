import pytest
from decimal import Decimal
from thriftsy import create_app, db
from thriftsy.config import TestConfig
from thriftsy.enums import UserRole, ProductStatus
from thriftsy.models.user import User
from thriftsy.models.product import Product


@pytest.fixture(scope="function")
def app(tmp_path):
    """Create application for testing"""
    app = create_app(TestConfig)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Test client"""
    return app.test_client()


@pytest.fixture
def runner(app):
    """Test CLI runner"""
    return app.test_cli_runner()


def _make_user(email, name, role=UserRole.USER, verified=False):
    user = User(
        email=email,
        name=name,
        phone="0901234567",
        role=role,
        is_verified_seller=verified,
    )
    user.set_password("password123")
    db.session.add(user)
    db.session.commit()
    return user


# User fixtures
@pytest.fixture
def buyer_user(app):
    """A plain shopper"""
    return _make_user("buyer@test.com", "Test Buyer")


@pytest.fixture
def seller_user(app):
    """A verified seller"""
    return _make_user("seller@test.com", "Test Seller", verified=True)


@pytest.fixture
def other_seller(app):
    """An unverified seller"""
    return _make_user("other@test.com", "Other Seller")


@pytest.fixture
def admin_user(app):
    return _make_user("admin@test.com", "Test Admin", role=UserRole.ADMIN)


def _login(client, email):
    response = client.post(
        "/api/auth/signin", json={"email": email, "password": "password123"}
    )
    assert response.status_code == 200, f"Login failed: {response.json}"
    return response.json["token"]


# Auth token fixtures
@pytest.fixture
def buyer_token(client, buyer_user):
    return _login(client, buyer_user.email)


@pytest.fixture
def seller_token(client, seller_user):
    return _login(client, seller_user.email)


@pytest.fixture
def other_seller_token(client, other_seller):
    return _login(client, other_seller.email)


@pytest.fixture
def admin_token(client, admin_user):
    return _login(client, admin_user.email)


@pytest.fixture
def buyer_headers(buyer_token):
    """Buyer authentication headers"""
    return {"Authorization": f"Bearer {buyer_token}"}


@pytest.fixture
def seller_headers(seller_token):
    """Seller authentication headers"""
    return {"Authorization": f"Bearer {seller_token}"}


@pytest.fixture
def other_seller_headers(other_seller_token):
    return {"Authorization": f"Bearer {other_seller_token}"}


@pytest.fixture
def admin_headers(admin_token):
    """Admin authentication headers"""
    return {"Authorization": f"Bearer {admin_token}"}


# Data fixtures
def _make_product(seller, title, price, status=ProductStatus.UNSOLD):
    product = Product(
        user_id=seller.id,
        title=title,
        price=Decimal(price),
        brand="Levi's",
        category="Jackets",
        size="M",
        condition="Good",
        status=status,
    )
    db.session.add(product)
    db.session.commit()
    return product


@pytest.fixture
def product(app, seller_user):
    """An unsold product priced 100.00"""
    return _make_product(seller_user, "Denim Jacket", "100.00")


@pytest.fixture
def second_product(app, seller_user):
    return _make_product(seller_user, "Wool Coat", "200.00")


@pytest.fixture
def other_product(app, other_seller):
    """A product from a different seller"""
    return _make_product(other_seller, "Silk Scarf", "50.00")


@pytest.fixture
def make_product():
    return _make_product


def order_payload(*products, tax="0", shipping="0", **extra):
    """Checkout body whose totals match the given products"""
    items = [
        {"productId": p.id, "title": p.title, "price": str(p.price), "quantity": 1}
        for p in products
    ]
    subtotal = sum((Decimal(p.price) for p in products), Decimal("0"))
    payload = {
        "items": items,
        "subtotal": str(subtotal),
        "tax": tax,
        "shipping": shipping,
        "total": str(subtotal + Decimal(tax) + Decimal(shipping)),
        "paymentMethod": "cod",
        "shippingAddress": {
            "name": "Test Buyer",
            "phone": "0901234567",
            "address": "1 Main St",
            "city": "Hanoi",
        },
    }
    payload.update(extra)
    return payload


@pytest.fixture
def checkout():
    return order_payload


@pytest.fixture
def placed_order(client, buyer_headers, product, second_product):
    """A pending order for both of the verified seller's products"""
    response = client.post(
        "/api/orders", json=order_payload(product, second_product), headers=buyer_headers
    )
    assert response.status_code == 201, response.json
    return response.json["id"]
