import io
import os


class FakeUploader:
    """Stands in for the media host: files named *broken* fail, everything else gets a URL."""

    def __init__(self):
        self.uploaded = []

    def upload(self, local_path):
        if not local_path or not os.path.exists(local_path):
            return None
        name = os.path.basename(local_path)
        os.remove(local_path)
        if "broken" in name:
            return None
        self.uploaded.append(name)
        return {"url": f"https://media.test/{name}"}


def registration_form(username="alice", email="a@x.com", password="p1", full_name="Alice Doe",
                      avatar=True, cover_image=False):
    form = {"fullName": full_name, "email": email, "username": username, "password": password}
    if avatar:
        form["avatar"] = (io.BytesIO(b"fake avatar"), "avatar.png")
    if cover_image:
        form["coverImage"] = (io.BytesIO(b"fake cover"), "cover.png")
    return form


def bearer(token):
    return {"Authorization": f"Bearer {token}"}
