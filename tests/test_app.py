from fastapi.testclient import TestClient
from dependencies import get_scheduler_factory
from main import app
from conftest import schedulers, virtual_scheduler

app.dependency_overrides[get_scheduler_factory] = lambda: virtual_scheduler

client = TestClient(app)

VALID_DESCRIPTION = "We need a dashboard that tracks energy use, waste and carbon emissions for all of our offices."

def login(role, email, password):
    login_response = client.post(f"/auth/{role}/login", json={"email": email, "password": password})
    assert login_response.status_code == 200
    return {"Authorization": f"Bearer {login_response.json()['token']}"}

def test_app_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"Hello": "DPH Client Portal"}

def test_app_201():
    client_headers = login("client", "client1@drinkph-demo.com", "ClientDemo2025!")
    admin_headers = login("admin", "admin@drinkph-demo.com", "DrinkPH2025!")

    #open form
    form_response = client.post("/portal/forms/", headers=client_headers)
    assert form_response.status_code == 201
    form_response_json = form_response.json()
    assert form_response_json["current_step"] == 1
    assert form_response_json["phase"] == "editing"
    form_id = form_response_json["form_id"]
    scheduler = schedulers[-1]

    #step 1
    fields_response = client.patch(f"/portal/forms/{form_id}/fields", headers=client_headers, json={
        "company_name": "EcoTech Solutions",
        "contact_email": "sarah@ecotech.com",
        "contact_phone": "+63 917 123 4567",
    })
    assert fields_response.status_code == 200
    assert fields_response.json()["live_validation"]["contact_email"]["is_valid"] == True
    next_response = client.post(f"/portal/forms/{form_id}/next", headers=client_headers)
    assert next_response.status_code == 200
    assert next_response.json()["current_step"] == 2

    #step 2
    client.patch(f"/portal/forms/{form_id}/fields", headers=client_headers, json={
        "project_type": "Sustainability Dashboard",
        "description": VALID_DESCRIPTION,
    })
    next_response = client.post(f"/portal/forms/{form_id}/next", headers=client_headers)
    assert next_response.json()["current_step"] == 3

    #step 3, switching currency clears the band
    client.patch(f"/portal/forms/{form_id}/fields", headers=client_headers, json={"timeline": "3-4 months", "budget_range": "₱150,000 - ₱300,000"})
    currency_response = client.put(f"/portal/forms/{form_id}/currency", headers=client_headers, json={"currency": "USD"})
    assert currency_response.json()["draft"]["budget_range"] == None
    client.patch(f"/portal/forms/{form_id}/fields", headers=client_headers, json={"budget_range": "$2,700 - $5,400"})
    next_response = client.post(f"/portal/forms/{form_id}/next", headers=client_headers)
    assert next_response.json()["current_step"] == 4

    #step 4 files
    files = [
        ("files", ("brief.pdf", b"%PDF-1.4 brief", "application/pdf")),
        ("files", ("song.mp3", b"ID3", "audio/mpeg")),
    ]
    upload_response = client.post(f"/portal/forms/{form_id}/files", headers=client_headers, files=files)
    assert upload_response.status_code == 201
    upload_response_json = upload_response.json()
    assert [file["name"] for file in upload_response_json["accepted"]] == ["brief.pdf"]
    assert upload_response_json["rejected"][0]["name"] == "song.mp3"
    assert len(upload_response_json["draft"]["files"]) == 1

    #auto-save fires after the debounce window
    scheduler.advance(1)

    #submit
    submit_response = client.post(f"/portal/forms/{form_id}/submit", headers=client_headers)
    assert submit_response.status_code == 201
    submit_response_json = submit_response.json()
    project_json = submit_response_json["project"]
    assert "id" in project_json
    assert project_json["status"] == "Submitted"
    assert project_json["company_name"] == "EcoTech Solutions"
    assert project_json["budget_range"] == "$2,700 - $5,400"
    assert project_json["admin_notes"] == None
    assert "created_at" in project_json
    assert submit_response_json["phase"] == "confirmed"
    assert submit_response_json["confirmation"]["files"][0]["name"] == "brief.pdf"
    project_id = project_json["id"]

    #confirmation dismisses itself and heads to the tracker
    scheduler.advance(3.5)
    read_response = client.get(f"/portal/forms/{form_id}", headers=client_headers)
    read_response_json = read_response.json()
    assert read_response_json["phase"] == "editing"
    assert read_response_json["current_step"] == 1
    assert read_response_json["draft"]["company_name"] == ""
    assert read_response_json["next_view"] == "tracker"
    assert client.get(f"/portal/forms/{form_id}", headers=client_headers).status_code == 404 #dismissed forms are dropped once read

    #the saved draft was cleared on success
    reopen_response = client.post("/portal/forms/", headers=client_headers)
    assert reopen_response.json()["restored"] == False

    #client tracker
    tracker_response = client.get("/tracker/projects", headers=client_headers)
    assert tracker_response.status_code == 200
    tracked_project = next(project for project in tracker_response.json() if project["id"] == project_id)
    assert tracked_project["progress"] == 20

    #admin review
    list_response = client.get("/projects/", headers=admin_headers, params={"search": "ecotech"})
    assert list_response.status_code == 200
    assert project_id in [project["id"] for project in list_response.json()]

    update_response = client.patch(f"/projects/{project_id}/status", headers=admin_headers, json={"status": "In Progress", "admin_notes": "Kickoff call booked"})
    assert update_response.status_code == 200
    update_response_json = update_response.json()
    assert update_response_json["status"] == "In Progress"
    assert update_response_json["admin_notes"] == "Kickoff call booked"
    assert update_response_json["created_at"] == project_json["created_at"]

    stats_response = client.get("/projects/stats", headers=admin_headers)
    assert stats_response.status_code == 200
    assert stats_response.json()["in_progress"] >= 1

    tracker_response = client.get("/tracker/projects", headers=client_headers, params={"search": project_id})
    tracker_response_json = tracker_response.json()
    assert len(tracker_response_json) == 1
    assert tracker_response_json[0]["status"] == "In Progress"
    assert tracker_response_json[0]["progress"] == 60

def test_app_restores_browser_draft():
    browser = TestClient(app) #anonymous visitor, drafts follow the browser cookie

    form_response = browser.post("/portal/forms/")
    assert form_response.status_code == 201
    assert form_response.json()["restored"] == False
    form_id = form_response.json()["form_id"]

    browser.patch(f"/portal/forms/{form_id}/fields", json={"company_name": "Green Leaf Co"})
    schedulers[-1].advance(1)

    abandon_response = browser.delete(f"/portal/forms/{form_id}")
    assert abandon_response.status_code == 204

    reopen_response = browser.post("/portal/forms/")
    reopen_response_json = reopen_response.json()
    assert reopen_response_json["restored"] == True
    assert reopen_response_json["draft"]["company_name"] == "Green Leaf Co"

def test_app_auth_me():
    client_headers = login("client", "client2@drinkph-demo.com", "ClientDemo2025!")
    me_response = client.get("/auth/me", headers=client_headers)
    assert me_response.status_code == 200
    assert me_response.json()["user"]["role"] == "client"
    assert me_response.json()["is_authenticated"] == True

    logout_response = client.post("/auth/logout", headers=client_headers)
    assert logout_response.status_code == 204
    me_response = client.get("/auth/me", headers=client_headers)
    assert me_response.json()["is_authenticated"] == False

def test_app_explicit_dismiss_drops_the_form():
    client_headers = login("client", "client2@drinkph-demo.com", "ClientDemo2025!")
    form_id = client.post("/portal/forms/", headers=client_headers).json()["form_id"]
    client.patch(f"/portal/forms/{form_id}/fields", headers=client_headers, json={"company_name": "Green Leaf Co", "contact_email": "hello@greenleaf.ph"})
    client.post(f"/portal/forms/{form_id}/next", headers=client_headers)
    client.patch(f"/portal/forms/{form_id}/fields", headers=client_headers, json={"project_type": "Website Development", "description": VALID_DESCRIPTION})
    client.post(f"/portal/forms/{form_id}/next", headers=client_headers)
    client.patch(f"/portal/forms/{form_id}/fields", headers=client_headers, json={"timeline": "ASAP", "budget_range": "Under ₱50,000"})
    client.post(f"/portal/forms/{form_id}/next", headers=client_headers)
    assert client.post(f"/portal/forms/{form_id}/submit", headers=client_headers).status_code == 201

    dismiss_response = client.post(f"/portal/forms/{form_id}/dismiss", headers=client_headers)
    assert dismiss_response.status_code == 200
    assert dismiss_response.json()["next_view"] == "tracker"
    assert client.get(f"/portal/forms/{form_id}", headers=client_headers).status_code == 404

def test_app_rejected_patch_keeps_the_draft():
    browser = TestClient(app)
    form_id = browser.post("/portal/forms/").json()["form_id"]
    browser.patch(f"/portal/forms/{form_id}/fields", json={"company_name": "EcoTech"})

    patch_response = browser.patch(f"/portal/forms/{form_id}/fields", json={"company_name": "Changed", "project_type": "Rocket Science"})
    assert patch_response.status_code == 422
    assert browser.get(f"/portal/forms/{form_id}").json()["draft"]["company_name"] == "EcoTech"
