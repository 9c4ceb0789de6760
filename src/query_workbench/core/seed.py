"""Demonstration dataset loaded into every freshly initialized session."""

SEED_TABLES = ("users", "categories", "products", "orders", "order_items")

SEED_SQL = """
CREATE TABLE users (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  username TEXT NOT NULL UNIQUE,
  email TEXT NOT NULL UNIQUE,
  full_name TEXT,
  created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE categories (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL UNIQUE,
  description TEXT
);

CREATE TABLE products (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  description TEXT,
  price REAL NOT NULL,
  category_id INTEGER,
  stock INTEGER DEFAULT 0,
  created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
  FOREIGN KEY (category_id) REFERENCES categories(id)
);

CREATE TABLE orders (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  user_id INTEGER NOT NULL,
  total_amount REAL NOT NULL,
  status TEXT DEFAULT 'pending',
  order_date DATETIME DEFAULT CURRENT_TIMESTAMP,
  FOREIGN KEY (user_id) REFERENCES users(id)
);

CREATE TABLE order_items (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  order_id INTEGER NOT NULL,
  product_id INTEGER NOT NULL,
  quantity INTEGER NOT NULL,
  price REAL NOT NULL,
  FOREIGN KEY (order_id) REFERENCES orders(id),
  FOREIGN KEY (product_id) REFERENCES products(id)
);

INSERT INTO users (username, email, full_name) VALUES
  ('john_doe', 'john@example.com', 'John Doe'),
  ('jane_smith', 'jane@example.com', 'Jane Smith'),
  ('bob_wilson', 'bob@example.com', 'Bob Wilson'),
  ('alice_brown', 'alice@example.com', 'Alice Brown'),
  ('charlie_davis', 'charlie@example.com', 'Charlie Davis');

INSERT INTO categories (name, description) VALUES
  ('Electronics', 'Electronic devices and gadgets'),
  ('Clothing', 'Apparel and fashion items'),
  ('Books', 'Physical and digital books'),
  ('Home & Garden', 'Home improvement and garden supplies'),
  ('Sports', 'Sports equipment and accessories');

INSERT INTO products (name, description, price, category_id, stock) VALUES
  ('Laptop Pro 15', 'High-performance laptop', 1299.99, 1, 25),
  ('Wireless Mouse', 'Ergonomic wireless mouse', 29.99, 1, 150),
  ('USB-C Cable', 'Fast charging cable', 12.99, 1, 200),
  ('Cotton T-Shirt', 'Comfortable cotton t-shirt', 19.99, 2, 100),
  ('Denim Jeans', 'Classic blue jeans', 49.99, 2, 75),
  ('Programming Book', 'Learn advanced programming', 39.99, 3, 50),
  ('Fiction Novel', 'Bestselling fiction', 14.99, 3, 80),
  ('Garden Tools Set', 'Complete gardening kit', 89.99, 4, 30),
  ('LED Desk Lamp', 'Adjustable LED lamp', 34.99, 4, 60),
  ('Tennis Racket', 'Professional tennis racket', 129.99, 5, 20);

INSERT INTO orders (user_id, total_amount, status) VALUES
  (1, 1329.98, 'completed'),
  (2, 69.98, 'completed'),
  (3, 179.97, 'pending'),
  (4, 54.98, 'shipped'),
  (1, 89.99, 'completed');

INSERT INTO order_items (order_id, product_id, quantity, price) VALUES
  (1, 1, 1, 1299.99),
  (1, 2, 1, 29.99),
  (2, 4, 2, 19.99),
  (2, 5, 1, 49.99),
  (3, 6, 1, 39.99),
  (3, 7, 2, 14.99),
  (3, 8, 1, 89.99),
  (4, 9, 1, 34.99),
  (4, 3, 1, 12.99),
  (5, 8, 1, 89.99);
"""
