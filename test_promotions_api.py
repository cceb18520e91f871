from test_menu_api import _category, _item, jprint


def _promotion(client, headers, **body):
    r = client.post("/promotions", headers=headers, json={"title": "Promo", **body})
    return jprint("POST /promotions", r)


def _setup_item(client, headers, price=20):
    cat = _category(client, headers, "Doces", 0)
    return _item(client, headers, cat, "Torta de limão", price)


def test_link_starts_without_discount_then_applies_it(client, auth_headers):
    item = _setup_item(client, auth_headers)
    promo = _promotion(client, auth_headers, title="Janeiro doce", start_date="2024-01-01", end_date="2024-01-31")
    assert promo["badge_text"] == "Promoção"
    assert promo["eligible"] is True

    link = jprint("POST link", client.post(f"/promotions/{promo['id']}/items", headers=auth_headers, json={"menu_item_id": item}))
    assert link["discount_type"] == "percentage"
    assert link["discount_value"] == 0
    assert link["discounted_price"] == 20

    r = client.post(f"/promotions/{promo['id']}/items", headers=auth_headers, json={"menu_item_id": item})
    assert r.status_code == 409

    r = client.patch(f"/promotions/{promo['id']}/items/{item}", headers=auth_headers,
                     json={"discount_type": "fixed", "discount_value": 5})
    link = jprint("PATCH link", r)
    assert link["discounted_price"] == 15

    menu = jprint("GET /public/menu", client.get("/public/menu"))
    card = menu["categories"][0]["items"][0]
    assert card["price"] == 20
    assert card["discounted_price"] == 15
    assert card["promotion"]["title"] == "Janeiro doce"

    links = jprint("GET links", client.get(f"/promotions/{promo['id']}/items", headers=auth_headers))
    assert [l["item_name"] for l in links] == ["Torta de limão"]

    promos = jprint("GET item promos", client.get(f"/promotions/items/{item}", headers=auth_headers))
    assert [p["id"] for p in promos] == [promo["id"]]


def test_percentage_discount_clamps_in_api(client, auth_headers):
    item = _setup_item(client, auth_headers, price=50)
    promo = _promotion(client, auth_headers)
    client.post(f"/promotions/{promo['id']}/items", headers=auth_headers, json={"menu_item_id": item})
    r = client.patch(f"/promotions/{promo['id']}/items/{item}", headers=auth_headers,
                     json={"discount_type": "percentage", "discount_value": 150})
    assert jprint("PATCH link", r)["discounted_price"] == 0


def test_negative_discount_rejected(client, auth_headers):
    item = _setup_item(client, auth_headers)
    promo = _promotion(client, auth_headers)
    client.post(f"/promotions/{promo['id']}/items", headers=auth_headers, json={"menu_item_id": item})
    r = client.patch(f"/promotions/{promo['id']}/items/{item}", headers=auth_headers,
                     json={"discount_type": "fixed", "discount_value": -1})
    assert r.status_code == 400


def test_unlinked_item_patch_is_not_found(client, auth_headers):
    item = _setup_item(client, auth_headers)
    promo = _promotion(client, auth_headers)
    r = client.patch(f"/promotions/{promo['id']}/items/{item}", headers=auth_headers, json={"discount_value": 5})
    assert r.status_code == 404


def test_eligible_list_needs_flag_and_window(client, auth_headers):
    live = _promotion(client, auth_headers, title="Ativa")
    _promotion(client, auth_headers, title="Desligada", is_active=False)
    _promotion(client, auth_headers, title="Vencida", end_date="2024-01-14")
    _promotion(client, auth_headers, title="Futura", start_date="2024-01-16")
    _promotion(client, auth_headers, title="Invertida", start_date="2024-02-01", end_date="2024-01-01")

    rows = jprint("GET /promotions/eligible", client.get("/promotions/eligible"))
    assert [p["id"] for p in rows] == [live["id"]]

    rows = jprint("GET /promotions", client.get("/promotions", headers=auth_headers, params={"active_only": True}))
    assert len(rows) == 4


def test_countdown(client, auth_headers, clock):
    promo = _promotion(client, auth_headers, end_date="2024-01-31")
    body = jprint("GET countdown", client.get(f"/promotions/{promo['id']}/countdown"))
    # 2024-01-15 12:00 -> 2024-02-01 00:00
    assert body["expired"] is False
    assert (body["days"], body["hours"], body["minutes"], body["seconds"]) == (16, 12, 0, 0)
    assert body["display"] == "16d 12:00:00"

    clock.advance(days=16, hours=12)
    body = jprint("GET countdown", client.get(f"/promotions/{promo['id']}/countdown"))
    assert body["expired"] is True

    open_ended = _promotion(client, auth_headers)
    body = jprint("GET countdown", client.get(f"/promotions/{open_ended['id']}/countdown"))
    assert body == {"promotion_id": open_ended["id"], "expired": False, "days": 0, "hours": 0,
                    "minutes": 0, "seconds": 0, "display": None}


def test_banner_rotation(client, auth_headers):
    assert client.get("/public/banner").json()["state"] == "idle"

    _promotion(client, auth_headers, title="Um")
    _promotion(client, auth_headers, title="Dois", end_date="2024-01-15")
    _promotion(client, auth_headers, title="Três")

    body = jprint("GET /public/banner", client.get("/public/banner", params={"index": 2, "step": "next"}))
    assert body["state"] == "showing"
    assert body["index"] == 0 and body["total"] == 3
    assert body["auto_advance"] is True

    body = jprint("GET /public/banner", client.get("/public/banner", params={"index": 0, "step": "prev"}))
    assert body["index"] == 2

    titles = {client.get("/public/banner", params={"index": i}).json()["promotion"]["title"] for i in range(3)}
    assert titles == {"Um", "Dois", "Três"}
    dois = [client.get("/public/banner", params={"index": i}).json() for i in range(3)]
    dois = next(b for b in dois if b["promotion"]["title"] == "Dois")
    assert dois["countdown"] == "12:00:00"


def test_deleting_promotion_removes_links(client, auth_headers):
    item = _setup_item(client, auth_headers)
    promo = _promotion(client, auth_headers)
    client.post(f"/promotions/{promo['id']}/items", headers=auth_headers, json={"menu_item_id": item})
    jprint("DELETE /promotions", client.delete(f"/promotions/{promo['id']}", headers=auth_headers))

    card = client.get("/public/menu").json()["categories"][0]["items"][0]
    assert card["promotion"] is None and card["discounted_price"] is None


def test_view_report(client, auth_headers):
    a = _promotion(client, auth_headers, title="A")
    b = _promotion(client, auth_headers, title="B")
    for _ in range(3):
        jprint("POST view", client.post(f"/public/promotions/{a['id']}/view", headers={"user-agent": "pytest"}))
    jprint("POST view", client.post(f"/public/promotions/{b['id']}/view"))

    report = jprint("GET report", client.get("/reports/promotion-views", headers=auth_headers))
    assert report["total_views"] == 4
    assert report["active_promotions"] == 2
    assert report["top"]["promotion_id"] == a["id"]
    assert [(s["title"], s["count"], s["percentage"]) for s in report["stats"]] == [("A", 3, 75.0), ("B", 1, 25.0)]

    assert client.post("/public/promotions/missing/view").status_code == 404


def test_view_report_with_no_views(client, auth_headers):
    p = _promotion(client, auth_headers, title="Silenciosa")
    report = jprint("GET report", client.get("/reports/promotion-views", headers=auth_headers))
    assert report["total_views"] == 0
    assert report["top"] is None
    assert report["active_promotions"] == 1
    assert report["stats"] == [{"promotion_id": p["id"], "title": "Silenciosa", "count": 0, "percentage": 0.0}]


def test_view_report_counts_only_active_promotions(client, auth_headers):
    _promotion(client, auth_headers, title="Ligada")
    _promotion(client, auth_headers, title="Desligada", is_active=False)
    report = jprint("GET report", client.get("/reports/promotion-views", headers=auth_headers))
    assert report["active_promotions"] == 1
    assert len(report["stats"]) == 2
