BASE_URL = "https://candymapper.com/"

URLS = {
    "home_page": BASE_URL,
    "two_factor_auth": "https://candymapper.com/2fa-validation-code",
    "join_us": "https://candymapper.com/m/login?r=%2Fjoin-us",
    "bcs": "https://www.bcs.org/",
    "halloween_party": "https://candymapper.com/halloween-party",
    "host_party": "https://candymapper.com/host-a-party-1",
    "attend_party": "https://candymapper.com/attend-a-party",
    "party_location": "https://candymapper.com/party-location",
    "error_404": "https://candymapper.com/error-404",
    "launch_candymapper": "https://candymapper.com/launch-candymapper",
    "keysight": "https://www.keysight.com/blogs/en/authors/jonathon-wright",
    "packt_publishing": "https://www.packtpub.com/en-us/product/enhanced-test-automation-with-webdriverio-9781837630189",
    "find_my_candy": "https://candymapper.com/find-my-candy",
    "automation_sandbox": "https://candymapper.com/an-automation-sandbox%3F",
    "graveyard_links": "https://candymapperr2.com/",
    "magic_object_model": "https://candymapper.com/magic-object-model%3F",
    "sandbox_tools": "https://candymapper.com/sandbox-tools",
    "vampiras_blog": "https://candymapper.com/vampiras-blog",
}
