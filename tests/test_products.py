import io
import os

from thriftsy.extensions import db
from thriftsy.enums import ProductStatus
from thriftsy.models.product import Product
from thriftsy.models.category import Category
from thriftsy.services.product_service import ProductService
from thriftsy.exceptions import ConflictError


def _stored(app):
    folder = app.config["UPLOAD_FOLDER"]
    return set(os.listdir(folder)) if os.path.isdir(folder) else set()


class TestProductCatalogue:
    """Public product listing"""

    def test_list_products(self, client, product, other_product):
        response = client.get("/api/products")

        assert response.status_code == 200
        titles = [p["title"] for p in response.json]
        assert set(titles) == {"Denim Jacket", "Silk Scarf"}

    def test_list_verified_only(self, client, product, other_product):
        response = client.get("/api/products?verified=true")

        assert response.status_code == 200
        assert [p["id"] for p in response.json] == [product.id]
        assert response.json[0]["is_verified_seller"] is True
        assert response.json[0]["seller"] == "Test Seller"

    def test_list_by_status(self, client, product, make_product, seller_user):
        make_product(seller_user, "Sold Boots", "30.00", status=ProductStatus.SOLD)

        response = client.get("/api/products?status=sold")

        assert [p["title"] for p in response.json] == ["Sold Boots"]

    def test_list_unknown_status(self, client, product):
        response = client.get("/api/products?status=lost")

        assert response.status_code == 400

    def test_list_by_seller(self, client, product, other_product, other_seller):
        response = client.get(f"/api/products?seller_id={other_seller.id}")

        assert [p["id"] for p in response.json] == [other_product.id]

    def test_get_product(self, client, product):
        response = client.get(f"/api/products/{product.id}")

        assert response.status_code == 200
        assert response.json["price"] == 100.0
        assert response.json["status"] == "unsold"

    def test_get_missing_product(self, client):
        response = client.get("/api/products/999")

        assert response.status_code == 404
        assert response.json["error"] == "Product not found"


class TestProductWrites:
    """Seller listing management"""

    def test_create_product_multipart(self, app, client, seller_headers, seller_user):
        response = client.post(
            "/api/products",
            data={
                "title": "Linen Shirt",
                "price": "25.50",
                "originalPrice": "60",
                "category": "Shirts",
                "productCondition": "Like new",
                "images": [
                    (io.BytesIO(b"first"), "front.jpg"),
                    (io.BytesIO(b"second"), "back.png"),
                ],
            },
            headers=seller_headers,
            content_type="multipart/form-data",
        )

        assert response.status_code == 201
        product = db.session.get(Product, response.json["id"])
        assert product.user_id == seller_user.id
        assert product.condition == "Like new"
        assert product.status == ProductStatus.UNSOLD
        assert len(product.images) == 2
        assert product.image == product.images[0].image_url
        stored = os.listdir(app.config["UPLOAD_FOLDER"])
        assert len(stored) == 2
        assert Category.query.filter_by(slug="shirts").count() == 1

    def test_create_product_json(self, client, seller_headers):
        response = client.post(
            "/api/products", json={"title": "Cap", "price": 9}, headers=seller_headers
        )

        assert response.status_code == 201
        assert response.json["product"]["images"] == []

    def test_create_product_rejects_bad_extension(self, client, seller_headers):
        response = client.post(
            "/api/products",
            data={"title": "Cap", "price": "9", "images": (io.BytesIO(b"x"), "run.exe")},
            headers=seller_headers,
            content_type="multipart/form-data",
        )

        assert response.status_code == 400
        assert Product.query.count() == 0

    def test_create_product_too_many_images(self, client, seller_headers):
        images = [(io.BytesIO(b"x"), f"{i}.jpg") for i in range(9)]
        response = client.post(
            "/api/products",
            data={"title": "Cap", "price": "9", "images": images},
            headers=seller_headers,
            content_type="multipart/form-data",
        )

        assert response.status_code == 400
        assert "At most 8" in response.json["error"]

    def test_create_product_requires_login(self, client):
        response = client.post("/api/products", json={"title": "Cap", "price": 9})

        assert response.status_code == 401

    def test_update_product(self, client, seller_headers, product):
        response = client.put(
            f"/api/products/{product.id}", json={"price": "80.00"}, headers=seller_headers
        )

        assert response.status_code == 200
        assert response.json["price"] == 80.0
        assert response.json["title"] == "Denim Jacket"

    def test_update_product_not_owner(self, client, other_seller_headers, product):
        response = client.put(
            f"/api/products/{product.id}", json={"price": "1"}, headers=other_seller_headers
        )

        assert response.status_code == 403

    def test_update_product_not_owner_stores_no_images(self, app, client, other_seller_headers,
                                                       product):
        response = client.put(
            f"/api/products/{product.id}",
            data={"title": "Mine now", "images": (io.BytesIO(b"img"), "a.png")},
            headers=other_seller_headers,
            content_type="multipart/form-data",
        )

        assert response.status_code == 403
        assert response.json["error"] == "Not the owner of this product"
        assert _stored(app) == set()

    def test_failed_create_removes_images(self, app, client, seller_headers, monkeypatch):
        def fail(*args, **kwargs):
            raise ConflictError("Duplicate listing")

        monkeypatch.setattr(ProductService, "create_product", staticmethod(fail))

        response = client.post(
            "/api/products",
            data={"title": "Cap", "price": "9", "images": (io.BytesIO(b"img"), "cap.jpg")},
            headers=seller_headers,
            content_type="multipart/form-data",
        )

        assert response.status_code == 409
        assert _stored(app) == set()

    def test_delete_product(self, client, seller_headers, product):
        product_id = product.id
        response = client.delete(f"/api/products/{product_id}", headers=seller_headers)

        assert response.status_code == 200
        assert db.session.get(Product, product_id) is None

    def test_delete_product_not_owner(self, client, buyer_headers, product):
        response = client.delete(f"/api/products/{product.id}", headers=buyer_headers)

        assert response.status_code == 403


class TestCategories:
    """Categories created from product listings"""

    def _create(self, client, headers, title, category):
        return client.post(
            "/api/products",
            json={"title": title, "price": 10, "category": category},
            headers=headers,
        )

    def test_list_categories_by_name(self, client, seller_headers):
        self._create(client, seller_headers, "Linen Shirt", "Shirts")
        self._create(client, seller_headers, "Silk Scarf", "Accessories")
        self._create(client, seller_headers, "Oxford Shirt", "shirts")

        response = client.get("/api/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json] == ["Accessories", "Shirts"]
        assert [c["slug"] for c in response.json] == ["accessories", "shirts"]
        assert response.json[0]["parent_id"] is None

    def test_list_categories_empty(self, client):
        response = client.get("/api/categories")

        assert response.status_code == 200
        assert response.json == []

    def test_filter_products_by_category(self, client, seller_headers):
        shirt = self._create(client, seller_headers, "Linen Shirt", "Shirts").json["id"]
        self._create(client, seller_headers, "Silk Scarf", "Accessories")
        shirts = Category.query.filter_by(slug="shirts").one()

        response = client.get(f"/api/products?category_id={shirts.id}")

        assert [p["id"] for p in response.json] == [shirt]
