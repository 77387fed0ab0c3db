import requests


def main():
    base = "http://127.0.0.1:8000"

    resp = requests.get(f"{base}/api/assistants")
    print("Assistants status:", resp.status_code)
    print("Body:", resp.text)

    resp = requests.post(f"{base}/api/make-calls", json={
        "assistantId": "<INSERT-ASSISTANT-ID>",
        "phoneNumbers": ["+<INSERT-YOUR-PHONE>"],
        "delay": 2000,
    })

    print("Make-calls status:", resp.status_code)
    print("Body:", resp.text)


if __name__ == "__main__":
    main()
