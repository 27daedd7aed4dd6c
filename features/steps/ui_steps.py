"""Step definitions for the offers admin page.

All interactions go through the browser (Selenium) against /admin; no
direct API calls are made in these steps.
"""

from behave import then, when  # pylint: disable=no-name-in-module
from selenium.webdriver.common.by import By

FIELD_IDS = {
    "Image URL": "offer_img",
    "Title": "offer_title",
    "Code": "offer_code",
    "Description": "offer_description",
}

BUTTON_IDS = {
    "Add Offer": "submit-btn",
    "Update Offer": "submit-btn",
    "Back to Home": "home-btn",
}


def _offer_codes(context):
    return [el.text for el in context.browser.find_elements(By.CSS_SELECTOR, "#offers .code")]


@when('I visit the "Offers Admin" page')
def step_visit_admin(context):
    """Open /admin"""
    context.browser.get(context.base_url + "/admin")


@then('the page title contains "{text}"')
def step_title_contains(context, text):
    """Assert that the document title and the heading contain the text"""
    assert text in (context.browser.title or "")
    heading = context.browser.find_element(By.ID, "title")
    assert "Manage Offers" in heading.text


@then('the submit button says "{label}"')
def step_submit_label(context, label):
    """Assert the form mode by its button label"""
    assert context.browser.find_element(By.ID, "submit-btn").text == label


@when('I set the "{field}" to "{value}"')
def step_set_field(context, field, value):
    """Type a value into one of the form fields"""
    element = context.browser.find_element(By.ID, FIELD_IDS[field])
    element.clear()
    element.send_keys(value)


@then('the "{field}" field should contain "{value}"')
def step_field_contains(context, field, value):
    """Assert the current value of a form field"""
    element = context.browser.find_element(By.ID, FIELD_IDS[field])
    assert element.get_attribute("value") == value


@when('I press the "{button}" button')
def step_press_button(context, button):
    """Click one of the page buttons"""
    context.browser.find_element(By.ID, BUTTON_IDS[button]).click()


@when('I press "{action}" on the offer "{code}"')
def step_press_on_offer(context, action, code):
    """Click Edit or Delete on the list entry showing the given code"""
    for item in context.browser.find_elements(By.CSS_SELECTOR, "#offers li"):
        if item.find_element(By.CSS_SELECTOR, ".code").text == code:
            item.find_element(By.CSS_SELECTOR, f".{action.lower()}-btn").click()
            return
    raise AssertionError(f"Offer {code} is not on the page")


@then('I should see the offer "{code}" in the list')
def step_offer_listed(context, code):
    """Assert an offer is listed"""
    assert code in _offer_codes(context), f"{code} not in {_offer_codes(context)}"


@then('I should not see the offer "{code}" in the list')
def step_offer_not_listed(context, code):
    """Assert an offer is not listed"""
    context.browser.implicitly_wait(0)
    try:
        assert code not in _offer_codes(context)
    finally:
        context.browser.implicitly_wait(context.wait_seconds)


@then("I should not be on the admin page")
def step_left_admin(context):
    """Assert the browser left /admin"""
    assert not context.browser.current_url.rstrip("/").endswith("/admin")
