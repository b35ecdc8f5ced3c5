"""
Table layout for the store, declared as data and synced by ``setup_db``.
Column types are backend neutral; ``migrations._map_type`` translates them.
Tables are listed parents first.
"""
from typing import Any, Dict, List

schema: List[Dict[str, Any]] = [
    {"table_name": "role_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "name": "VARCHAR(50) NOT NULL",
        "UNIQUE": ["name"],
        }},
    {"table_name": "user_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "full_name": "VARCHAR(100) NOT NULL",
        "username": "VARCHAR(50) NOT NULL UNIQUE",
        "password_hash": "TEXT NOT NULL",
        "email": "VARCHAR(255) UNIQUE",
        "phone": "VARCHAR(20)",
        "address": "TEXT",
        "role_id": "INTEGER NOT NULL",
        "is_active": "BOOL NOT NULL DEFAULT 1",
        "created_at": "TIMESTAMP NOT NULL",
        "FOREIGN KEY": [{
                "key": "role_id",
                "parent_table": "role_table",
                "parent_key": "id",
            }]
        }},
    {"table_name": "category_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "name": "VARCHAR(100) NOT NULL",
        "parent_id": "INTEGER",
        "FOREIGN KEY": [{
                "key": "parent_id",
                "parent_table": "category_table",
                "parent_key": "id",
                "instruction": "ON DELETE SET NULL",
            }]
        }},
    {"table_name": "product_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "category_id": "INTEGER",
        "name": "VARCHAR(200) NOT NULL",
        "description": "TEXT",
        "image_url": "TEXT",
        "supplier_name": "VARCHAR(100)",
        "is_active": "BOOL NOT NULL DEFAULT 1",
        "created_at": "TIMESTAMP NOT NULL",
        "FOREIGN KEY": [{
                "key": "category_id",
                "parent_table": "category_table",
                "parent_key": "id",
                "instruction": "ON DELETE SET NULL",
            }]
        }},
    {"table_name": "variant_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "product_id": "INTEGER NOT NULL",
        "name": "VARCHAR(100)",
        "price": "DECIMAL NOT NULL CHECK (price >= 0)",
        "stock_quantity": "INTEGER NOT NULL DEFAULT 0 CHECK (stock_quantity >= 0)",
        "is_active": "BOOL NOT NULL DEFAULT 1",
        "FOREIGN KEY": [{
                "key": "product_id",
                "parent_table": "product_table",
                "parent_key": "id",
                "instruction": "ON DELETE CASCADE",
            }]
        }},
    {"table_name": "cart_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "user_id": "INTEGER NOT NULL",
        "variant_id": "INTEGER NOT NULL",
        "quantity": "INTEGER NOT NULL DEFAULT 1 CHECK (quantity >= 1)",
        "UNIQUE": ["user_id", "variant_id"],
        "FOREIGN KEY": [{
                "key": "user_id",
                "parent_table": "user_table",
                "parent_key": "id",
                "instruction": "ON DELETE CASCADE",
            },
            {
                "key": "variant_id",
                "parent_table": "variant_table",
                "parent_key": "id",
            }]
        }},
    {"table_name": "coupon_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "code": "VARCHAR(50) NOT NULL UNIQUE",
        "discount_value": "DECIMAL NOT NULL",
        "start_date": "TIMESTAMP NOT NULL",
        "end_date": "TIMESTAMP NOT NULL",
        "is_active": "BOOL NOT NULL DEFAULT 1",
        }},
    {"table_name": "order_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "user_id": "INTEGER NOT NULL",
        "order_date": "TIMESTAMP NOT NULL",
        "shipping_address": "TEXT",
        "total_amount": "DECIMAL NOT NULL DEFAULT 0",
        "shipping_fee": "DECIMAL NOT NULL DEFAULT 0",
        "status": "VARCHAR(20) NOT NULL DEFAULT 'Pending'",
        "payment_method": "VARCHAR(50)",
        "note": "TEXT",
        "coupon_id": "INTEGER",
        "FOREIGN KEY": [{
                "key": "user_id",
                "parent_table": "user_table",
                "parent_key": "id",
            },
            {
                "key": "coupon_id",
                "parent_table": "coupon_table",
                "parent_key": "id",
                "instruction": "ON DELETE SET NULL",
            }]
        }},
    {"table_name": "order_detail_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "order_id": "INTEGER NOT NULL",
        "variant_id": "INTEGER NOT NULL",
        "quantity": "INTEGER NOT NULL DEFAULT 1",
        "unit_price": "DECIMAL NOT NULL",
        "FOREIGN KEY": [{
                "key": "order_id",
                "parent_table": "order_table",
                "parent_key": "id",
                "instruction": "ON DELETE CASCADE",
            },
            {
                "key": "variant_id",
                "parent_table": "variant_table",
                "parent_key": "id",
            }]
        }},
    {"table_name": "review_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "user_id": "INTEGER NOT NULL",
        "product_id": "INTEGER NOT NULL",
        "rating": "INTEGER NOT NULL CHECK (rating BETWEEN 1 AND 5)",
        "comment": "TEXT",
        "created_at": "TIMESTAMP NOT NULL",
        "UNIQUE": ["user_id", "product_id"],
        "FOREIGN KEY": [{
                "key": "user_id",
                "parent_table": "user_table",
                "parent_key": "id",
                "instruction": "ON DELETE CASCADE",
            },
            {
                "key": "product_id",
                "parent_table": "product_table",
                "parent_key": "id",
                "instruction": "ON DELETE CASCADE",
            }]
        }},
    {"table_name": "address_table",
    "table_columns": {
        "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
        "user_id": "INTEGER NOT NULL",
        "address_line": "TEXT",
        "is_default": "BOOL NOT NULL DEFAULT 0",
        "FOREIGN KEY": [{
                "key": "user_id",
                "parent_table": "user_table",
                "parent_key": "id",
                "instruction": "ON DELETE CASCADE",
            }]
        }},
]
