from __future__ import annotations

from config.defaults import ANNOUNCEMENT_PIN_MARKER


PUBLIC_WELCOME_TEXT = """Welcome to the Clique Cabana Discord!
This is the home base for our house music family—a collective rooted in Atlanta, built on rhythm, culture, and community. We throw house music events across the city and beyond, bringing together dancers, DJs, creators, and music lovers who live for the groove.
Here you’ll find event announcements, mixes, artist spotlights, and space to connect with like-minded people shaping the sound and culture of Atlanta and surrounding cities. Whether you’re behind the decks, on the dance floor, or just discovering the scene, you’re part of the clique now.
Respect the vibe, support each other, and let the music move you.
Welcome to the Clique 🖤"""

WELCOME_EMBED_TITLE = "Welcome to Clique Cabana 🖤"
WELCOME_EMBED_FOOTER = "Respect the vibe. Support each other. Let the music move you."

NEW_ACCOUNT_LINE = "If you’re new to Discord or the scene, no stress — ask questions anytime."
VETERAN_ACCOUNT_LINE = "Looks like you’ve been around for a minute — glad you found your way here."

FESTIVAL_ANNOUNCEMENT_TEXT = f"""We’re kicking off festival season inside Piedmont Park, right in the heart of Atlanta.

This three day headline series is the largest event run Clique Cabana has ever produced, bringing three of the most respected names in house music to Atlanta’s most iconic park. As we step into the new year and build momentum toward festival season, this series sets the tone for everything ahead.

We’re incredibly excited and grateful to welcome these artists to the city and to celebrate together in Atlanta’s largest park. Expect elevated production, immersive sound, and the kind of open air energy that only Piedmont Park can deliver.

The kickoff on February 7 goes even bigger. This is a full day party running from 2 PM until 10 PM, happening alongside one of the largest daytime festivals in Atlanta, Oyster Fest. In the middle of Piedmont Park, Clique Cabana will host a dedicated takeover stage alongside everything else happening that day. The park will also feature the largest oyster festival of the season, plus an additional stage with a live Blink 182 tribute band, creating a true multi stage, all day experience. Lee Foss will headline the Clique Cabana stage and close out the entire event that night.

Lineup and dates:

Lee Foss on February 7
Justin Martin on February 21
Kyle Walker on March 7

Each event stands on its own while still being part of a larger series experience built for real house music lovers.

{ANNOUNCEMENT_PIN_MARKER}"""

NO_UPCOMING_EVENTS_TEXT = "No upcoming events listed yet 🖤"
OPTED_IN_TEXT = "✅ You’re opted in. I’ll DM you a reminder before events."
OPTED_OUT_TEXT = "✅ Opted out. You won’t receive event reminder DMs."
OPTIN_FAILED_TEXT = "Something went wrong saving your reminder preference. Try again in a bit."
