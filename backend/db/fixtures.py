"""
Demo data for offline mode and for seeding a fresh database.

Two stores (Kyoto Gion, Tokyo Shibuya) with a shared catalog. Items carry no
human IDs on purpose; they show the derived ``ITM-XXXX`` fallback until an
import or an edit assigns one.
"""

STORES = [
    {"id": "demo-gion", "name": "Demo Store: Kyoto Gion"},
    {"id": "demo-shibuya", "name": "Demo Store: Tokyo Shibuya"},
]

CATEGORIES = [
    {"id": "cat-coffee", "name": "Coffee & Beans"},
    {"id": "cat-beverages", "name": "Beverages"},
    {"id": "cat-desserts", "name": "Desserts"},
    {"id": "cat-food", "name": "Food"},
    {"id": "cat-supplies", "name": "Supplies"},
]

VENDORS = [
    {
        "id": "vendor-kyoto-roasters",
        "name": "Kyoto Roasters Inc.",
        "contact_name": "Haruki Tanaka",
        "internal_contact_name": "Mai Nakamura",
        "email": "contact@kyotoroasters.jp",
        "phone": "+81-75-000-0000",
        "notes": "Primary coffee supplier for Kyoto region stores.",
    },
    {
        "id": "vendor-brazil-farm",
        "name": "Brazil Farm Direct",
        "contact_name": "Mariana Souza",
        "internal_contact_name": "Daichi Okada",
        "email": "sales@brazildirect.com",
        "phone": "+55-11-1234-5678",
        "notes": "Direct import of specialty beans.",
    },
    {
        "id": "vendor-local-dairy",
        "name": "Shizuoka Dairy Cooperative",
        "contact_name": "Kenji Sato",
        "internal_contact_name": "Aiko Fujimoto",
        "email": "support@shizuoka-dairy.jp",
        "phone": "+81-54-222-1100",
        "notes": "Fresh dairy supplier with daily deliveries.",
    },
]


def _item(id, name, normalized_name, short_name, description, cost_a, cost_b, sku, name_en, category_id, **extra):
    row = {
        "id": id,
        "name": name,
        "normalized_name": normalized_name,
        "short_name": short_name,
        "description": description,
        "cost_a": cost_a,
        "cost_b": cost_b,
        "sku": sku,
        "is_discontinued": False,
        "name_en": name_en,
        "category_id": category_id,
    }
    row.update(extra)
    return row


ITEMS = [
    _item("item-soysauce", "しょうゆ(ボトル)", "soy_sauce_bottle", "しょうゆ", "1L", 250, 300, "SEAS-010",
          "Soy Sauce", "cat-food", jan_code="4901515123456", supplier="Kikkoman"),
    _item("item-water", "ミネラルウォーター", "mineral_water", "水", "500mlペットボトル", 80, 100, "BEV-001",
          "Mineral Water", "cat-beverages"),
    _item("item-coffee-blend", "コーヒー（オリジナルブレンド）", "coffee_original_blend", "オリブレ", "200gパック",
          450, 500, "ITEM-001", "Coffee (Original Blend)", "cat-coffee",
          jan_code="4901234567890", supplier="Kyoto Roasters Inc.", vendor_id="vendor-kyoto-roasters"),
    _item("item-beans-brazil", "コーヒー豆（ブラジル）", "coffee_beans_brazil", "ブラジル豆", "1kg袋", 1800, 2000,
          "ITEM-002", "Coffee Beans (Brazil)", "cat-coffee",
          jan_code="4901234567891", supplier="Brazil Farm Direct", vendor_id="vendor-brazil-farm"),
    _item("item-beans-ethiopia", "コーヒー豆（エチオピア）", "coffee_beans_ethiopia", "エチオピア豆", "1kg袋",
          2200, 2400, "ITEM-003", "Coffee Beans (Ethiopia)", "cat-coffee"),
    _item("item-beans-colombia", "コーヒー豆（コロンビア）", "coffee_beans_colombia", "コロンビア豆", "1kg袋",
          2000, 2200, "ITEM-004", "Coffee Beans (Colombia)", "cat-coffee", is_discontinued=True),
    _item("item-pudding-white", "プリン（白 - なめらかカスタード）", "pudding_white", "白プリン", "", 120, 150,
          "DSRT-001", "Pudding (White - Custard)", "cat-desserts"),
    _item("item-pudding-black", "プリン（黒 - 濃厚チョコレート）", "pudding_black", "黒プリン", "", 130, 160,
          "DSRT-002", "Pudding (Black - Chocolate)", "cat-desserts"),
    _item("item-orange-juice", "ジュース（オレンジ）", "orange_juice", "オレンジJ", "1Lパック", 250, 300,
          "BEV-002", "Juice (Orange)", "cat-beverages"),
    _item("item-apple-juice", "ジュース（リンゴ）", "apple_juice", "リンゴJ", "1Lパック", 250, 300,
          "BEV-003", "Juice (Apple)", "cat-beverages"),
    _item("item-teabag", "紅茶（ティーバッグ）", "black_tea_teabag", "ティーバッグ", "50個入り", 300, 350,
          "BEV-005", "Tea Bags", "cat-beverages"),
    _item("item-milk", "牛乳", "milk", "牛乳", "1Lパック", 180, 220, "DAIRY-001", "Milk", "cat-beverages",
          supplier="Shizuoka Dairy Cooperative", vendor_id="vendor-local-dairy"),
    _item("item-sugar", "シュガーポーション", "sugar_portion", "シュガー", "100個入り袋", 400, 450,
          "MISC-001", "Sugar Portion", "cat-supplies"),
    _item("item-napkin", "紙ナプキン", "paper_napkin", "ナプキン", "200枚入り", 150, 180, "SUP-001",
          "Paper Napkin", "cat-supplies"),
    _item("item-cleaner", "業務用洗剤", "commercial_cleaner", "洗剤", "5L", 1500, 1600, "SUP-002",
          "Commercial Cleaner", "cat-supplies"),
    _item("item-croissant", "クロワッサン（冷凍生地）", "croissant", "クロワッサン", "冷凍生地", 80, 100,
          "BAKE-001", "Croissant (Frozen)", "cat-food"),
    _item("item-sandwich", "たまごサンド", "egg_sandwich", "たまごサンド", "調理済み", 200, 250, "PREP-001",
          "Egg Sandwich", "cat-food"),
    _item("item-cake-strawberry", "いちごのショートケーキ（冷凍）", "strawberry_shortcake", "いちごケーキ", "冷凍",
          350, 400, "DSRT-003", "Strawberry Shortcake (Frozen)", "cat-desserts"),
    _item("item-syrup-vanilla", "シロップ（バニラ）", "vanilla_syrup", "バニラシロップ", "750mlボトル", 700, 800,
          "SYRP-001", "Syrup (Vanilla)", "cat-beverages"),
]


def _sub(id, human_id, name, description=""):
    return {"id": id, "human_id": human_id, "name": name, "description": description}


LOCATIONS = [
    # Kyoto Gion
    {
        "id": "loc-gion-storage-3f", "store_id": "demo-gion", "human_id": "A",
        "name": "3階壁面収納", "description": "備品・乾物ストック",
        "sublocations": [
            _sub("loc-gion-storage-3f-a", "01", "A上段", "軽いもの"),
            _sub("loc-gion-storage-3f-b", "02", "B中段", "シロップ類"),
            _sub("loc-gion-storage-3f-c", "03", "C下段", "重いもの"),
        ],
    },
    {
        "id": "loc-gion-fridge-1f", "store_id": "demo-gion", "human_id": "B",
        "name": "1階冷蔵庫・冷凍庫（外側)", "description": "お客様用",
        "sublocations": [
            _sub("loc-gion-fridge-1f-a", "01", "冷蔵エリア"),
            _sub("loc-gion-fridge-1f-b", "02", "冷凍エリア", "アイス・冷凍ケーキ"),
        ],
    },
    {
        "id": "loc-gion-register", "store_id": "demo-gion", "human_id": "C",
        "name": "レジ周り", "description": "販売用小物",
        "sublocations": [
            _sub("loc-gion-register-a", "01", "前の棚A", "コーヒー豆"),
            _sub("loc-gion-register-b", "02", "カウンター下", "袋、シュガー"),
        ],
    },
    {
        "id": "loc-gion-kitchen-fridge", "store_id": "demo-gion", "human_id": "D",
        "name": "厨房冷蔵庫", "description": "調理用",
        "sublocations": [
            _sub("loc-gion-kitchen-fridge-a", "01", "上段", "乳製品"),
            _sub("loc-gion-kitchen-fridge-b", "02", "下段", "サンドイッチなど"),
        ],
    },
    {
        "id": "loc-gion-kitchen-pantry", "store_id": "demo-gion", "human_id": "E",
        "name": "厨房パントリー", "description": "",
        "sublocations": [],
    },
    # Tokyo Shibuya
    {
        "id": "loc-shibuya-backyard", "store_id": "demo-shibuya", "human_id": "BK",
        "name": "バックヤード", "description": "",
        "sublocations": [
            _sub("loc-shibuya-backyard-shelf-a", "01", "棚A", "飲料ストック"),
            _sub("loc-shibuya-backyard-shelf-b", "02", "棚B", "乾物・コーヒー豆"),
            _sub("loc-shibuya-backyard-shelf-c", "03", "棚C", "清掃用品・備品"),
            _sub("loc-shibuya-backyard-freezer", "04", "冷凍ストッカー"),
        ],
    },
    {
        "id": "loc-shibuya-floor", "store_id": "demo-shibuya", "human_id": "FL",
        "name": "売り場", "description": "",
        "sublocations": [
            _sub("loc-shibuya-floor-fridge", "01", "飲料冷蔵庫"),
            _sub("loc-shibuya-floor-shelf", "02", "商品棚", "焼き菓子など"),
            _sub("loc-shibuya-floor-register", "03", "レジ横", "販売用コーヒー豆"),
        ],
    },
    {
        "id": "loc-shibuya-kitchen", "store_id": "demo-shibuya", "human_id": "KT",
        "name": "厨房", "description": "",
        "sublocations": [
            _sub("loc-shibuya-kitchen-fridge", "01", "冷蔵庫", "調理用食材"),
        ],
    },
]


def _count(id, store_id, item_id, location_id, sub_location_id, last_count, last_counted_at, description=None):
    return {
        "id": id,
        "store_id": store_id,
        "item_id": item_id,
        "location_id": location_id,
        "sub_location_id": sub_location_id,
        "last_count": last_count,
        "last_counted_at": last_counted_at,
        "description": description,
    }


STOCKTAKES = [
    # Kyoto Gion
    _count("st-g-1", "demo-gion", "item-coffee-blend", "loc-gion-register", "loc-gion-register-a", 12,
           "2023-10-26T10:00:00Z", "ディスプレイ用"),
    _count("st-g-2", "demo-gion", "item-beans-brazil", "loc-gion-kitchen-pantry", None, 3, "2023-10-26T10:00:00Z"),
    _count("st-g-3", "demo-gion", "item-soysauce", "loc-gion-kitchen-pantry", None, 2, "2023-10-26T10:00:00Z"),
    _count("st-g-4", "demo-gion", "item-teabag", "loc-gion-storage-3f", "loc-gion-storage-3f-a", 10,
           "2023-10-25T14:00:00Z"),
    _count("st-g-5", "demo-gion", "item-pudding-white", "loc-gion-kitchen-fridge", "loc-gion-kitchen-fridge-a", 8,
           "2023-10-26T11:30:00Z"),
    _count("st-g-6", "demo-gion", "item-pudding-black", "loc-gion-kitchen-fridge", "loc-gion-kitchen-fridge-a", 6,
           "2023-10-26T11:30:00Z"),
    _count("st-g-7", "demo-gion", "item-water", "loc-gion-fridge-1f", "loc-gion-fridge-1f-a", 24,
           "2023-10-26T09:00:00Z"),
    _count("st-g-8", "demo-gion", "item-milk", "loc-gion-kitchen-fridge", "loc-gion-kitchen-fridge-a", 5,
           "2023-10-27T08:00:00Z", "賞味期限確認"),
    _count("st-g-9", "demo-gion", "item-sugar", "loc-gion-register", "loc-gion-register-b", 1,
           "2023-10-25T18:00:00Z"),
    _count("st-g-10", "demo-gion", "item-napkin", "loc-gion-storage-3f", "loc-gion-storage-3f-a", 3,
           "2023-10-25T14:00:00Z"),
    _count("st-g-11", "demo-gion", "item-sandwich", "loc-gion-kitchen-fridge", "loc-gion-kitchen-fridge-b", 10,
           "2023-10-27T08:00:00Z"),
    _count("st-g-12", "demo-gion", "item-cake-strawberry", "loc-gion-fridge-1f", "loc-gion-fridge-1f-b", 7,
           "2023-10-26T11:30:00Z"),
    _count("st-g-13", "demo-gion", "item-syrup-vanilla", "loc-gion-storage-3f", "loc-gion-storage-3f-b", 4,
           "2023-10-25T14:00:00Z"),
    # Tokyo Shibuya
    _count("st-s-1", "demo-shibuya", "item-water", "loc-shibuya-backyard", "loc-shibuya-backyard-shelf-a", 48,
           "2023-10-27T09:00:00Z"),
    _count("st-s-2", "demo-shibuya", "item-coffee-blend", "loc-shibuya-backyard", "loc-shibuya-backyard-shelf-b", 20,
           "2023-10-27T09:00:00Z"),
    _count("st-s-3", "demo-shibuya", "item-water", "loc-shibuya-floor", "loc-shibuya-floor-fridge", 15,
           "2023-10-27T09:00:00Z"),
    _count("st-s-4", "demo-shibuya", "item-orange-juice", "loc-shibuya-floor", "loc-shibuya-floor-fridge", 10,
           "2023-10-27T09:00:00Z"),
    _count("st-s-5", "demo-shibuya", "item-apple-juice", "loc-shibuya-floor", "loc-shibuya-floor-fridge", 11,
           "2023-10-27T09:00:00Z"),
    _count("st-s-6", "demo-shibuya", "item-beans-ethiopia", "loc-shibuya-floor", "loc-shibuya-floor-register", 8,
           "2023-10-27T10:00:00Z", "SALE対象"),
    _count("st-s-7", "demo-shibuya", "item-beans-ethiopia", "loc-shibuya-backyard", "loc-shibuya-backyard-shelf-b", 5,
           "2023-10-27T09:00:00Z"),
    _count("st-s-8", "demo-shibuya", "item-croissant", "loc-shibuya-backyard", "loc-shibuya-backyard-freezer", 30,
           "2023-10-27T09:15:00Z"),
    _count("st-s-9", "demo-shibuya", "item-milk", "loc-shibuya-kitchen", "loc-shibuya-kitchen-fridge", 8,
           "2023-10-27T08:30:00Z"),
    _count("st-s-10", "demo-shibuya", "item-cleaner", "loc-shibuya-backyard", "loc-shibuya-backyard-shelf-c", 2,
           "2023-10-26T15:00:00Z"),
    _count("st-s-11", "demo-shibuya", "item-napkin", "loc-shibuya-backyard", "loc-shibuya-backyard-shelf-c", 10,
           "2023-10-26T15:00:00Z"),
]
